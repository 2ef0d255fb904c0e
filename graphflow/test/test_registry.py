from graphflow.core.Node import NodeDefinition, PortSpec
from graphflow.nodes import BUILTIN_NODES
from graphflow.noderegistry.NodeRegistry import NodeRegistry, create_default_registry, register_all_nodes


class ShadowAdd(NodeDefinition):
    type = "Add"
    category = "custom"
    outputs = [PortSpec.of("out", "number")]

    def execute(self, context):
        context.setOutputValue("out", 42)


class TestNodeRegistry:

    def setup_method(self):
        self.registry = create_default_registry()

    def test_all_builtins_registered(self):
        assert len(self.registry) == len(BUILTIN_NODES)
        for definition_class in BUILTIN_NODES:
            assert definition_class.type in self.registry

    def test_get_unknown_returns_none(self):
        assert self.registry.get("DoesNotExist") is None

    def test_get_by_category(self):
        math_types = {d.type for d in self.registry.getByCategory("math")}
        assert math_types == {"Add", "Subtract", "Multiply", "Divide"}
        assert self.registry.getByCategory("nothing") == []

    def test_categories_in_registration_order(self):
        assert self.registry.categories() == ["math", "control", "array", "special", "datetime"]

    def test_last_registration_wins(self):
        self.registry.register(ShadowAdd())
        assert isinstance(self.registry.get("Add"), ShadowAdd)
        assert len(self.registry) == len(BUILTIN_NODES)

    def test_registries_are_independent(self):
        empty = NodeRegistry()
        assert len(empty) == 0
        assert empty.get("Add") is None

        register_all_nodes(empty)
        empty.register(ShadowAdd())
        assert not isinstance(self.registry.get("Add"), ShadowAdd)

    def test_definition_serialization(self):
        add = self.registry.get("Add").to_dict()
        assert add["type"] == "Add"
        assert add["category"] == "math"
        assert add["inputs"] == []
        assert add["outputs"] == [{"name": "out", "type": "number | array"}]

        compare = self.registry.get("Compare")
        assert compare.get_input_spec("a").type is not None
        assert compare.get_input_spec("missing") is None
