import calendar
from datetime import datetime, timedelta, timezone
from typing import Any

from ..core.Errors import GraphError
from ..core.Interface import INodeContext
from ..core.Node import NodeDefinition, PortSpec
from ..core.Types import toNumber


def _parse_datetime(value: Any) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # epoch milliseconds
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise GraphError("CreateDate: invalid date value") from None

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise GraphError("CreateDate: invalid date value") from None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    raise GraphError("CreateDate: input must be a string or number")


def add_months(moment: datetime, months: int) -> datetime:
    """Shift by whole months, clamping the day to the target month's length."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def to_iso_string(moment: datetime) -> str:
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class CreateDateNode(NodeDefinition):
    type = "CreateDate"
    category = "datetime"
    description = "Creates a date from an ISO string or a millisecond timestamp"
    inputs = [PortSpec.of("value", "string | number")]
    outputs = [PortSpec.of("out", "object")]

    def execute(self, context: INodeContext) -> None:
        context.setOutputValue("out", _parse_datetime(context.getInputValue("value")))


class AddDateNode(NodeDefinition):
    type = "AddDate"
    category = "datetime"
    description = "Adds time intervals to a date"
    inputs = [
        PortSpec.of("date", "object"),
        PortSpec.of("seconds", "number"),
        PortSpec.of("minutes", "number"),
        PortSpec.of("hours", "number"),
        PortSpec.of("days", "number"),
        PortSpec.of("months", "number"),
        PortSpec.of("years", "number"),
    ]
    outputs = [PortSpec.of("out", "object")]

    def execute(self, context: INodeContext) -> None:
        moment = context.getInputValue("date")
        if moment is None:
            return
        if not isinstance(moment, datetime):
            raise GraphError("AddDate: date input must be a date")

        delta = timedelta()
        for unit in ("seconds", "minutes", "hours", "days"):
            amount = context.getInputValue(unit)
            if amount is not None:
                delta += timedelta(**{unit: toNumber(amount)})
        result = moment + delta

        months = context.getInputValue("months")
        if months is not None:
            result = add_months(result, int(toNumber(months)))

        years = context.getInputValue("years")
        if years is not None:
            result = add_months(result, 12 * int(toNumber(years)))

        context.setOutputValue("out", result)


class FormatDateNode(NodeDefinition):
    type = "FormatDate"
    category = "datetime"
    description = "Converts a date to a string: iso, locale, date, time or timestamp"
    inputs = [
        PortSpec.of("date", "object"),
        PortSpec.of("format", "string"),
    ]
    outputs = [PortSpec.of("out", "string")]

    def execute(self, context: INodeContext) -> None:
        moment = context.getInputValue("date")
        format_name = context.getInputValue("format") or "iso"
        if moment is None:
            return
        if not isinstance(moment, datetime):
            raise GraphError("FormatDate: date input must be a date")

        if format_name == "locale":
            result = moment.strftime("%c")
        elif format_name == "date":
            result = moment.strftime("%a %b %d %Y")
        elif format_name == "time":
            result = moment.strftime("%H:%M:%S")
        elif format_name == "timestamp":
            result = str(int(moment.timestamp() * 1000))
        else:
            result = to_iso_string(moment)

        context.setOutputValue("out", result)
