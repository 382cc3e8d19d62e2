"""
SPDX license expression handling for Mantissa Attribution.

Expressions such as "MIT", "Apache-2.0 OR MIT" or
"(GPL-2.0-or-later WITH Classpath-exception-2.0) AND BSD-3-Clause" are
parsed with license_expression and converted into an immutable AST. The
canonical string form of the AST is used as the grouping key for
resolved licenses, so equivalent spellings of the same expression
(operator case, redundant parentheses, whitespace) collapse into one key.
"""

from __future__ import annotations

from dataclasses import dataclass

from license_expression import (
    ExpressionError,
    LicenseSymbol,
    LicenseWithExceptionSymbol,
    Licensing,
)

from attribution.errors import InvalidLicenseExpressionError


class SpdxExpression:
    """Base class for SPDX expression nodes."""

    def licenses(self) -> list[str]:
        """Return the single licenses of this expression, in order and unique."""
        raise NotImplementedError

    @property
    def is_single(self) -> bool:
        return False


@dataclass(frozen=True)
class SpdxLicense(SpdxExpression):
    """A single license identifier or LicenseRef."""

    license_id: str

    def licenses(self) -> list[str]:
        return [self.license_id]

    @property
    def is_single(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.license_id


@dataclass(frozen=True)
class SpdxWithException(SpdxExpression):
    """A license with an exception, e.g. "GPL-2.0-only WITH Classpath-exception-2.0"."""

    license: SpdxLicense
    exception: str

    def licenses(self) -> list[str]:
        return [str(self)]

    @property
    def is_single(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"{self.license} WITH {self.exception}"


@dataclass(frozen=True)
class SpdxCompound(SpdxExpression):
    """Two or more expressions joined by AND or OR."""

    operator: str
    operands: tuple[SpdxExpression, ...]

    def licenses(self) -> list[str]:
        result: list[str] = []
        for operand in self.operands:
            for license_id in operand.licenses():
                if license_id not in result:
                    result.append(license_id)
        return result

    def _format_child(self, child: SpdxExpression) -> str:
        if isinstance(child, SpdxCompound) and child.operator != self.operator:
            return f"({child})"
        return str(child)

    def __str__(self) -> str:
        return f" {self.operator} ".join(self._format_child(o) for o in self.operands)


class SpdxExpressionParser:
    """
    Parser for SPDX license expressions.

    Tokenizing and operator precedence are left to license_expression:
    WITH binds tighter than AND, which binds tighter than OR, and
    operators are accepted in any case. Identifiers keep their spelling.
    Nested operands with the same operator are flattened, so
    "MIT OR (Apache-2.0 OR BSD-3-Clause)" has three operands.
    """

    def __init__(self, licensing: Licensing | None = None):
        self._licensing = licensing or Licensing()

    def parse(self, expression: str) -> SpdxExpression:
        """
        Parse an expression string.

        Args:
            expression: License expression text

        Returns:
            Root expression node

        Raises:
            InvalidLicenseExpressionError: If the expression is invalid
        """
        if not expression or not expression.strip():
            raise InvalidLicenseExpressionError("Empty license expression", expression)

        try:
            parsed = self._licensing.parse(expression, simple=True)
        except ExpressionError as e:
            position = getattr(e, "position", None)
            raise InvalidLicenseExpressionError(
                f"Cannot parse license expression: {e}",
                expression,
                position if isinstance(position, int) else -1,
            ) from e

        if parsed is None:
            raise InvalidLicenseExpressionError("Empty license expression", expression)

        return self._convert(parsed, expression)

    def _convert(self, node, expression: str) -> SpdxExpression:
        if isinstance(node, LicenseWithExceptionSymbol):
            license_id = node.license_symbol.key
            exception = node.exception_symbol.key
            self._validate_id(license_id, expression)
            self._validate_id(exception, expression)
            return SpdxWithException(SpdxLicense(license_id), exception)

        if isinstance(node, LicenseSymbol):
            self._validate_id(node.key, expression)
            return SpdxLicense(node.key)

        if isinstance(node, self._licensing.AND):
            operator = "AND"
        elif isinstance(node, self._licensing.OR):
            operator = "OR"
        else:
            raise InvalidLicenseExpressionError(
                f"Unsupported expression element '{node}'", expression
            )

        operands: list[SpdxExpression] = []
        for arg in node.args:
            child = self._convert(arg, expression)
            if isinstance(child, SpdxCompound) and child.operator == operator:
                operands.extend(child.operands)
            else:
                operands.append(child)

        if len(operands) == 1:
            return operands[0]
        return SpdxCompound(operator, tuple(operands))

    def _validate_id(self, license_id: str, expression: str) -> None:
        # "+" only as the last character ("or later"), ":" only in DocumentRef ids.
        position = expression.find(license_id)
        valid = bool(license_id) and all(
            (c.isascii() and c.isalnum()) or c in ".-+:_" for c in license_id
        )
        if not valid or "+" in license_id[:-1]:
            raise InvalidLicenseExpressionError(
                f"Invalid license identifier '{license_id}'", expression, position
            )
        if ":" in license_id and not license_id.startswith("DocumentRef-"):
            raise InvalidLicenseExpressionError(
                f"Invalid license identifier '{license_id}'", expression, position
            )


_PARSER = SpdxExpressionParser()


def parse_expression(expression: str) -> SpdxExpression:
    """
    Parse an SPDX license expression.

    Convenience function for one-off parsing.

    Raises:
        InvalidLicenseExpressionError: If the expression is invalid
    """
    return _PARSER.parse(expression)


def normalize_expression(expression: str) -> str:
    """Return the canonical string form of an SPDX license expression."""
    return str(parse_expression(expression))


def is_valid_expression(expression: str) -> bool:
    """Check if an expression parses without errors."""
    try:
        parse_expression(expression)
    except InvalidLicenseExpressionError:
        return False
    return True
