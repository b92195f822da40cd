from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from .errors import ConfigurationError

MIN_HEADER_LEVEL = 1
MAX_HEADER_LEVEL = 6


class SplitOptions(BaseModel):
    """Policy the splitter enforces. Validated eagerly on construction."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_chars: int = 2048  # upper bound per segment, overlap not counted
    min_chars: int = 500  # segments shorter than this get merged
    overlap: int = 256  # backward overlap copied into chunks after the first
    header_levels: Tuple[int, ...] = (1, 2)  # split points and title candidates
    preserve_code_blocks: bool = True
    code_block_max_chars: Optional[int] = None  # None -> 2x max_chars
    fallback_close_on_nested_open: bool = True
    id_prefix: str = ""
    trim: bool = True

    @model_validator(mode="after")
    def _check_bounds(self) -> "SplitOptions":
        problems = option_problems(self)
        if problems:
            raise ConfigurationError(problems)
        return self

    @property
    def fence_size_limit(self) -> int:
        """Closed fences longer than this become breakable."""
        if self.code_block_max_chars is None:
            return self.max_chars * 2
        return self.code_block_max_chars

    @classmethod
    def build(cls, **overrides: Any) -> "SplitOptions":
        """Construct options, reporting every problem as a ConfigurationError."""
        try:
            return cls(**overrides)
        except ValidationError as e:
            raise ConfigurationError(
                [
                    f"{'.'.join(str(part) for part in err['loc']) or 'options'}: {err['msg']}"
                    for err in e.errors()
                ]
            ) from e

    def with_overrides(self, **overrides: Any) -> "SplitOptions":
        """Return a validated copy with the given fields replaced.

        Every passed value applies, ``None`` included, so
        ``code_block_max_chars=None`` restores the derived limit.
        """
        data = self.model_dump()
        data.update(overrides)
        return SplitOptions.build(**data)


def option_problems(options: SplitOptions) -> List[str]:
    """Collect every violated constraint instead of stopping at the first."""
    problems = []
    if options.max_chars <= 0:
        problems.append(f"maxChars must be positive, got {options.max_chars}")
    if options.min_chars < 0:
        problems.append(f"minChars must be non-negative, got {options.min_chars}")
    if options.overlap < 0:
        problems.append(f"overlap must be non-negative, got {options.overlap}")
    if options.overlap >= options.max_chars:
        problems.append(
            f"Overlap ({options.overlap}) must be less than maxChars ({options.max_chars})"
        )
    if options.min_chars >= options.max_chars:
        problems.append(
            f"minChars ({options.min_chars}) must be less than maxChars ({options.max_chars})"
        )
    if not options.header_levels:
        problems.append("headerLevels must contain at least one level")
    elif any(
        level < MIN_HEADER_LEVEL or level > MAX_HEADER_LEVEL
        for level in options.header_levels
    ):
        problems.append(
            f"headerLevels must contain values between {MIN_HEADER_LEVEL} and {MAX_HEADER_LEVEL}"
        )
    if options.code_block_max_chars is not None and options.code_block_max_chars <= 0:
        problems.append(
            f"codeBlockMaxChars must be positive, got {options.code_block_max_chars}"
        )
    return problems
