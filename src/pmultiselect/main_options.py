"""Click option helpers for mutual exclusivity."""
import click
from Xlib import X, XK


def _check_mutual_exclusion(name: str, not_required_if: list[str], opts: dict) -> None:
    """Raise UsageError if mutually exclusive options are both present.

    Args:
        name: Name of the current option.
        not_required_if: List of option names that are mutually exclusive.
        opts: Dictionary of parsed options.

    Raises:
        click.UsageError: If both options are present.
    """
    for other in not_required_if:
        if other in opts:
            msg = f"Options --{name} and --{other} are mutually exclusive"
            raise click.UsageError(msg)


class MutuallyExclusiveOption(click.Option):
    """Click option that enforces mutual exclusivity with another option."""

    def __init__(self, *args, **kwargs):
        """Initialize with not_required_if parameter for mutual exclusion."""
        self.not_required_if = kwargs.pop("not_required_if", [])
        super().__init__(*args, **kwargs)

    def handle_parse_result(self, ctx, opts, args):
        """Check mutual exclusion before the value is processed."""
        if self.name in opts:
            _check_mutual_exclusion(self.name, self.not_required_if, opts)
        return super().handle_parse_result(ctx, opts, args)


def validate_separator(ctx, param, value):
    """Accept a single-character separator."""
    if value is not None and len(value) != 1:
        raise click.BadParameter("must be a single character")
    return value


def validate_keysyms(ctx, param, value):
    """Accept only names X knows as keysyms, e.g. F9."""
    for name in value:
        if XK.string_to_keysym(name) == X.NoSymbol:
            raise click.BadParameter(f"unknown keysym {name!r}")
    return tuple(value)
