"""Integer arithmetic tools: sum, parity and primality."""

import math

from toolloop_server.tools.types import ParameterSchema, ParameterType, ToolContract


async def sum_of_two_numbers(firstNumber: int, secondNumber: int) -> dict:
    return {"result": firstNumber + secondNumber}


async def even_odd_check(number: int) -> dict:
    return {"isEven": number % 2 == 0}


async def prime_number_check(number: int) -> dict:
    """Trial division up to the integer square root."""
    if number <= 1:
        return {"isPrime": False}
    for divisor in range(2, math.isqrt(number) + 1):
        if number % divisor == 0:
            return {"isPrime": False}
    return {"isPrime": True}


SUM_OF_TWO_NUMBERS = ToolContract(
    name="sum_of_two_numbers",
    description="Calculate the sum of two integers",
    parameters={
        "firstNumber": ParameterSchema(ParameterType.INTEGER, "The first integer"),
        "secondNumber": ParameterSchema(ParameterType.INTEGER, "The second integer"),
    },
    required=frozenset({"firstNumber", "secondNumber"}),
    handler=sum_of_two_numbers,
)

EVEN_ODD_CHECK = ToolContract(
    name="even_odd_check",
    description="Check if a number is even or odd",
    parameters={
        "number": ParameterSchema(ParameterType.INTEGER, "The number to check"),
    },
    required=frozenset({"number"}),
    handler=even_odd_check,
)

PRIME_NUMBER_CHECK = ToolContract(
    name="prime_number_check",
    description="Check if a number is a prime number",
    parameters={
        "number": ParameterSchema(ParameterType.INTEGER, "The number to check"),
    },
    required=frozenset({"number"}),
    handler=prime_number_check,
)
