"""
Structured Exchanges - Prompt Contracts

A StructuredExchange pairs an ordered set of input fields with an ordered set
of output fields plus a natural-language instruction. The Model Invoker renders
it into prompt text and parses the backend's reply back into output fields.

Field values travel between markers of the form:

    [[ ## field_name ## ]]
    value

and the reply is expected to end with the `[[ ## completed ## ]]` marker.
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .errors import ParseError

COMPLETED_MARKER = "completed"

_MARKER_RE = re.compile(r"\[\[\s*##\s*(\w+)\s*##\s*\]\]")


def field_marker(name: str) -> str:
    """Return the section marker for a field name."""
    return f"[[ ## {name} ## ]]"


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True)
class ExchangeField:
    """
    A single typed field of an exchange.

    Attributes:
        name: Field identifier, used in markers and as dict key
        description: What the field holds, shown to the model
        choices: Closed set of allowed values (output fields only)
    """
    name: str
    description: str = ""
    choices: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class StructuredExchange:
    """
    Named input/output schema plus instruction. Immutable once defined.

    Attributes:
        name: Exchange name (used for logging and tracing)
        instruction: Natural-language description of the transformation
        inputs: Ordered input fields
        outputs: Ordered output fields
    """
    name: str
    instruction: str
    inputs: Tuple[ExchangeField, ...]
    outputs: Tuple[ExchangeField, ...]

    @property
    def input_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.inputs)

    @property
    def output_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.outputs)

    def render(self, **values: str) -> str:
        """
        Render the exchange instantiated with concrete input values.

        Args:
            **values: One value per declared input field

        Returns:
            Prompt text for the generation backend

        Raises:
            ParseError: If a declared input is missing or an unknown one is given
        """
        missing = [name for name in self.input_names if name not in values]
        if missing:
            raise ParseError(
                f"Missing input fields for exchange '{self.name}'",
                details=", ".join(missing),
            )

        unknown = [name for name in values if name not in self.input_names]
        if unknown:
            raise ParseError(
                f"Unknown input fields for exchange '{self.name}'",
                details=", ".join(unknown),
            )

        lines = [self.instruction.strip(), ""]

        lines.append("Your input fields are:")
        for idx, f in enumerate(self.inputs, start=1):
            lines.append(f"{idx}. `{f.name}`: {f.description}".rstrip())

        lines.append("Your output fields are:")
        for idx, f in enumerate(self.outputs, start=1):
            line = f"{idx}. `{f.name}`: {f.description}".rstrip()
            if f.choices:
                options = ", ".join(f.choices)
                line += f" (one of: {options})"
            lines.append(line)

        lines.append("")
        for f in self.inputs:
            lines.append(field_marker(f.name))
            lines.append(str(values[f.name]))
            lines.append("")

        first = field_marker(self.outputs[0].name)
        lines.append(
            "Respond with the corresponding output fields, starting with the "
            f"field `{first}`, and then ending with the marker for "
            f"`{field_marker(COMPLETED_MARKER)}`."
        )

        return "\n".join(lines)

    def parse(self, text: str) -> Dict[str, str]:
        """
        Map backend text onto the declared output fields.

        When the exchange has a single output and the text carries no field
        markers at all, the whole stripped text is taken as that output.

        Args:
            text: Raw text returned by the generation backend

        Returns:
            Dict mapping each output field name to its value

        Raises:
            ParseError: If a field is missing, empty or violates its choices
        """
        sections = _split_sections(text)

        if not sections and len(self.outputs) == 1:
            sections = {self.outputs[0].name: text.strip()}

        result: Dict[str, str] = {}
        for f in self.outputs:
            if f.name not in sections:
                raise ParseError(
                    f"Field '{f.name}' missing from '{self.name}' response",
                    details=text[:200],
                )

            value = sections[f.name]
            if not value.strip():
                raise ParseError(
                    f"Field '{f.name}' is empty in '{self.name}' response",
                    details=text[:200],
                )
            if f.choices and value not in f.choices:
                raise ParseError(
                    f"Value for '{f.name}' is not one of {list(f.choices)}",
                    details=value[:200],
                )
            result[f.name] = value

        return result


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _split_sections(text: str) -> Dict[str, str]:
    """Split marker-delimited text into {field_name: value}."""
    matches = list(_MARKER_RE.finditer(text))
    sections: Dict[str, str] = {}

    for idx, match in enumerate(matches):
        name = match.group(1)
        if name == COMPLETED_MARKER:
            continue
        end = matches[idx + 1].start() if idx + 1 < len(matches) else len(text)
        # First occurrence wins
        sections.setdefault(name, text[match.end():end].strip())

    return sections
