"""Tool registry: holds the tool contracts offered to the model.

The registry is built once at startup from a static list of contracts and
then frozen. During request handling it is shared, read-only state.
"""

import logging
from typing import Any, Iterable, Iterator

from toolloop_server.errors import (
    DuplicateToolError,
    InvalidToolContractError,
    RegistryFrozenError,
    UnknownToolError,
)
from toolloop_server.tools.types import ParameterType, ToolContract

logger = logging.getLogger(__name__)


def check_contract(contract: ToolContract) -> None:
    """Check the invariants of a tool contract.

    Raises:
        InvalidToolContractError: If the contract is malformed
    """
    if not contract.name or not contract.name.strip():
        raise InvalidToolContractError(contract.name, "name must be non-empty")

    if not callable(contract.handler):
        raise InvalidToolContractError(contract.name, "handler is not callable")

    undeclared = sorted(set(contract.required) - set(contract.parameters))
    if undeclared:
        raise InvalidToolContractError(
            contract.name,
            f"required arguments not declared as parameters: {', '.join(undeclared)}",
        )

    for param_name, param in contract.parameters.items():
        if not isinstance(param.type, ParameterType):
            raise InvalidToolContractError(
                contract.name, f"parameter '{param_name}' has unsupported type"
            )
        if param.type is ParameterType.ENUM and not param.enum:
            raise InvalidToolContractError(
                contract.name, f"enum parameter '{param_name}' has no allowed values"
            )
        if param.type is not ParameterType.ENUM and param.enum:
            raise InvalidToolContractError(
                contract.name,
                f"parameter '{param_name}' declares values but is not an enum",
            )


class ToolRegistry:
    """Ordered collection of tool contracts, keyed by unique name.

    Provides:
    - Tool registration with contract checks
    - Tool lookup by name
    - Function-calling schemas for the completion service
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolContract] = {}
        self._frozen = False

    def register(self, contract: ToolContract) -> None:
        """Register a tool contract.

        Raises:
            RegistryFrozenError: If the registry has been frozen
            InvalidToolContractError: If the contract is malformed
            DuplicateToolError: If a tool with the same name exists
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register '{contract.name}': registry is frozen"
            )
        check_contract(contract)
        if contract.name in self._tools:
            raise DuplicateToolError(contract.name)

        self._tools[contract.name] = contract
        logger.debug(f"Registered tool: {contract.name}")

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, name: str) -> ToolContract:
        """Get a tool contract by name.

        Raises:
            UnknownToolError: If no tool with that name is registered
        """
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def names(self) -> list[str]:
        """List registered tool names in registration order."""
        return list(self._tools)

    def schemas(self) -> list[dict[str, Any]]:
        """Get function-calling schemas for all tools in registration order."""
        return [contract.to_schema() for contract in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolContract]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)


def build_registry(contracts: Iterable[ToolContract]) -> ToolRegistry:
    """Build and freeze a registry from a static list of contracts.

    Any registration error propagates; callers treat it as fatal at startup.
    """
    registry = ToolRegistry()
    for contract in contracts:
        registry.register(contract)
    registry.freeze()
    logger.info(f"Tool registry ready with {len(registry)} tools: {registry.names()}")
    return registry
