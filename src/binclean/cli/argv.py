"""
Argv preprocessor for multi-value options.

Click options take exactly one value per occurrence, but ``--nuget-pattern``
accepts zero or more. The argv is normalized before Typer parses it:
- ``--nuget-pattern a b`` → ``--nuget-pattern a --nuget-pattern b``
- ``--nuget-pattern`` with no values → ``--nuget``
"""

_MULTI_VALUE_OPTIONS = {"--nuget-pattern": "--nuget"}


def preprocess_argv(argv: list[str]) -> list[str]:
    """Expand multi-value options into repeated single-value options.

    Values are collected until the next token that starts with ``-``.
    A ``--`` token ends option processing and everything after it is kept
    as is.
    """
    result: list[str] = []
    i = 0
    while i < len(argv):
        token = argv[i]
        i += 1

        if token == "--":
            result.extend(argv[i - 1 :])
            break

        if token not in _MULTI_VALUE_OPTIONS:
            result.append(token)
            continue

        values: list[str] = []
        while i < len(argv) and not argv[i].startswith("-"):
            values.append(argv[i])
            i += 1

        if not values:
            result.append(_MULTI_VALUE_OPTIONS[token])
            continue

        for value in values:
            result.extend([token, value])

    return result
