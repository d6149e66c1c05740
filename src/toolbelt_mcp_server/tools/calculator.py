"""Basic arithmetic tool."""

from __future__ import annotations

import math
import operator
from decimal import Decimal
from typing import Callable, Literal

from pydantic import Field

from toolbelt_mcp.tools import ToolDefinition, ToolParameters, ToolResult

Operation = Literal["add", "subtract", "multiply", "divide"]

_OPERATIONS: dict[str, Callable[[float, float], float]] = {
    "add": operator.add,
    "subtract": operator.sub,
    "multiply": operator.mul,
    "divide": operator.truediv,
}


class CalculateParams(ToolParameters):
    """Parameters for the calculate tool."""

    operation: Operation = Field(description="The arithmetic operation to perform")
    a: float = Field(strict=True, description="The first number")
    b: float = Field(strict=True, description="The second number")


def format_number(value: float) -> str:
    """Print a number the way JSON-speaking hosts expect.

    Integral values have no fractional part and non-finite values read
    ``Infinity`` or ``NaN``. Exponent notation is kept for magnitudes below
    ``1e-6`` or from ``1e21`` upwards, without zero padding (``1e-7``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))

    text = repr(value)
    if 1e-6 <= abs(value) < 1e21:
        return format(Decimal(text), "f") if "e" in text else text
    mantissa, _, exponent = text.partition("e")
    power = int(exponent)
    sign = "+" if power > 0 else "-"
    return f"{mantissa}e{sign}{abs(power)}"


def calculator_tool() -> ToolDefinition:
    """Create the calculate tool definition."""

    async def handler(params: CalculateParams) -> ToolResult:
        if params.operation == "divide" and params.b == 0:
            return ToolResult.error("Error: Cannot divide by zero")

        result = _OPERATIONS[params.operation](params.a, params.b)
        return ToolResult.text(
            f"{format_number(params.a)} {params.operation} "
            f"{format_number(params.b)} = {format_number(result)}"
        )

    return ToolDefinition(
        name="calculate",
        description=(
            "Perform basic arithmetic operations (add, subtract, multiply, divide)"
        ),
        parameters_model=CalculateParams,
        handler=handler,
    )
