from .MathNodes import AddNode, SubtractNode, MultiplyNode, DivideNode
from .ControlNodes import IfNode, CompareNode, SwitchNode, ForEachNode
from .ArrayNodes import MapNode, FilterNode, ReduceNode
from .SpecialNodes import ValueNode, InputNode, OutputNode, StartNode, CollectNode
from .DateTimeNodes import CreateDateNode, AddDateNode, FormatDateNode

# Registration order is the order authoring tools list them in
BUILTIN_NODES = [
    AddNode,
    SubtractNode,
    MultiplyNode,
    DivideNode,
    IfNode,
    CompareNode,
    SwitchNode,
    ForEachNode,
    MapNode,
    FilterNode,
    ReduceNode,
    ValueNode,
    InputNode,
    OutputNode,
    StartNode,
    CollectNode,
    CreateDateNode,
    AddDateNode,
    FormatDateNode,
]
