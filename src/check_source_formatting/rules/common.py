from __future__ import annotations

from check_source_formatting.engine.rule import make_rule

# Applied to every supported file type before the language rule-set.
COMMON_RULES = {
    "trailing_whitespace": make_rule(
        r"[ \t]+$",
        message="Line {0}: Trailing whitespace",
        replacer="",
    ),
    "mixed_indentation": make_rule(
        r"^\t* +\t",
        message="Line {0}: Mixed spaces and tabs in indentation",
    ),
}
