import re
from typing import Any, List, Optional, Sequence


class PlaceholderSubstitutor:
    """
    Positional placeholder substitution:
    the i-th {...} token of a template gets the i-th value
    """

    def __init__(self, **kwargs):
        self.logger = kwargs['logger']

        # Non-nested token with at least one character inside
        self.token_pattern = re.compile(r'\{[^{}]+\}')

    def find_tokens(self, template: Optional[str]) -> List[str]:
        if not template:
            return []
        return self.token_pattern.findall(template)

    def apply(self, template: Optional[str], args: Optional[Sequence[Any]] = None) -> str:
        """
        Replace tokens left to right with values
        Extra tokens stay verbatim, extra values are ignored, None renders as empty string
        """
        if not template:
            return template or ""
        if not args:
            return template

        values = list(args)
        position = 0

        def _replace(match):
            nonlocal position
            if position >= len(values):
                return match.group(0)
            value = values[position]
            position += 1
            return "" if value is None else str(value)

        try:
            return self.token_pattern.sub(_replace, template)
        except Exception as e:
            # str() of a caller value failed
            self.logger.error(f"[Localization] Error substituting placeholders in '{template}': {e}")
            return template
