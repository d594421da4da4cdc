"""Unit tests for tool contracts and the tool registry."""

import pytest

from toolloop_server.errors import (
    DuplicateToolError,
    InvalidToolContractError,
    RegistryFrozenError,
    UnknownToolError,
)
from toolloop_server.tools import (
    ParameterSchema,
    ParameterType,
    ToolContract,
    ToolRegistry,
    build_registry,
)
from toolloop_server.tools.builtin import SUM_OF_TWO_NUMBERS


async def _noop(**kwargs):
    return kwargs


def _contract(name="echo", parameters=None, required=frozenset()):
    return ToolContract(
        name=name,
        description="Echo the arguments",
        parameters=parameters
        if parameters is not None
        else {"text": ParameterSchema(ParameterType.STRING, "Text to echo")},
        required=required,
        handler=_noop,
    )


class TestRegister:
    """Tests for ToolRegistry.register."""

    def test_register_and_lookup(self):
        registry = ToolRegistry()
        contract = _contract()
        registry.register(contract)

        assert registry.lookup("echo") is contract
        assert "echo" in registry
        assert len(registry) == 1

    def test_duplicate_name_rejected(self):
        registry = ToolRegistry()
        registry.register(_contract())

        with pytest.raises(DuplicateToolError) as exc_info:
            registry.register(_contract())

        assert exc_info.value.name == "echo"
        assert len(registry) == 1

    def test_required_must_be_declared(self):
        registry = ToolRegistry()
        contract = _contract(required=frozenset({"text", "missing"}))

        with pytest.raises(InvalidToolContractError, match="missing"):
            registry.register(contract)

        assert "echo" not in registry

    def test_empty_name_rejected(self):
        with pytest.raises(InvalidToolContractError):
            ToolRegistry().register(_contract(name="  "))

    def test_enum_without_values_rejected(self):
        contract = _contract(
            parameters={"unit": ParameterSchema(ParameterType.ENUM, "Unit")}
        )
        with pytest.raises(InvalidToolContractError, match="no allowed values"):
            ToolRegistry().register(contract)

    def test_values_on_non_enum_rejected(self):
        contract = _contract(
            parameters={
                "unit": ParameterSchema(ParameterType.STRING, "Unit", enum=("a",))
            }
        )
        with pytest.raises(InvalidToolContractError):
            ToolRegistry().register(contract)

    def test_frozen_registry_rejects_registration(self):
        registry = ToolRegistry()
        registry.freeze()

        assert registry.frozen is True
        with pytest.raises(RegistryFrozenError):
            registry.register(_contract())


class TestLookup:
    """Tests for lookup and enumeration."""

    def test_unknown_tool(self):
        registry = ToolRegistry()
        with pytest.raises(UnknownToolError) as exc_info:
            registry.lookup("does_not_exist")

        assert exc_info.value.code == "unknown_tool"
        assert exc_info.value.details == {"name": "does_not_exist"}

    def test_names_keep_registration_order(self):
        registry = ToolRegistry()
        for name in ["b_tool", "a_tool", "c_tool"]:
            registry.register(_contract(name=name))

        assert registry.names() == ["b_tool", "a_tool", "c_tool"]
        assert [c.name for c in registry] == ["b_tool", "a_tool", "c_tool"]


class TestSchemas:
    """Tests for the function-calling schema rendering."""

    def test_builtin_schema(self):
        schema = SUM_OF_TWO_NUMBERS.to_schema()

        assert schema == {
            "type": "function",
            "function": {
                "name": "sum_of_two_numbers",
                "description": "Calculate the sum of two integers",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "firstNumber": {
                            "type": "integer",
                            "description": "The first integer",
                        },
                        "secondNumber": {
                            "type": "integer",
                            "description": "The second integer",
                        },
                    },
                    "required": ["firstNumber", "secondNumber"],
                },
            },
        }

    def test_enum_schema(self):
        param = ParameterSchema(
            ParameterType.ENUM, "Temperature unit", enum=("celsius", "fahrenheit")
        )
        assert param.to_json_schema() == {
            "type": "string",
            "enum": ["celsius", "fahrenheit"],
            "description": "Temperature unit",
        }

    def test_registry_schemas_in_order(self):
        registry = build_registry([_contract(name="first"), _contract(name="second")])

        names = [s["function"]["name"] for s in registry.schemas()]
        assert names == ["first", "second"]


class TestBuildRegistry:
    """Tests for build_registry."""

    def test_build_freezes(self):
        registry = build_registry([_contract()])
        assert registry.frozen is True

    def test_build_with_duplicates_fails(self):
        with pytest.raises(DuplicateToolError):
            build_registry([_contract(), _contract()])
