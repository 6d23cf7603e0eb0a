from __future__ import annotations

from dataclasses import dataclass

MINIMUM_VERSION = (3, 9)


def _parse_version(target_version: str | tuple[int, int]) -> tuple[int, int]:
    if not isinstance(target_version, str):
        return target_version
    major, _, rest = target_version.partition(".")
    minor = rest.partition(".")[0]
    return int(major), int(minor or 0)


@dataclass(frozen=True)
class GenerationProfile:
    """Python language features available to generated code.

    Attributes:
        use_future_annotations: Emit ``from __future__ import annotations``
        use_pep604: Write unions as ``X | Y`` instead of ``Union[X, Y]``
        use_typing_extensions: Import ``TypedDict``/``Required`` from
            typing_extensions; pydantic only accepts that TypedDict before 3.12
    """

    use_future_annotations: bool
    use_pep604: bool
    use_typing_extensions: bool

    @classmethod
    def from_version(cls, target_version: str | tuple[int, int]) -> GenerationProfile:
        """Build the profile of a target interpreter, given as "3.11" or (3, 11)."""
        version = _parse_version(target_version)
        if version < MINIMUM_VERSION:
            raise ValueError(f"Python {version[0]}.{version[1]} is not supported, the minimum is 3.9")
        return cls(
            use_future_annotations=True,
            use_pep604=version >= (3, 10),
            use_typing_extensions=version < (3, 12),
        )
