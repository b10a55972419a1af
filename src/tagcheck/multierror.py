"""Ordered multi-error container."""

from collections.abc import Iterator

from .errors import TagcheckError


class MultiError(TagcheckError):
    """An ordered list of errors that is itself an error.

    Errors keep the order in which they were appended. Nested ``MultiError``
    values are flattened on append.
    """

    def __init__(self, errors: list[BaseException] | None = None):
        self.errors: list[BaseException] = []
        super().__init__()
        if errors:
            self.append(*errors)

    def append(self, *errs: BaseException | None) -> "MultiError":
        """Append errors in order, skipping ``None`` and flattening nested groups."""
        for err in errs:
            if err is None:
                continue
            if isinstance(err, MultiError):
                self.errors.extend(err.errors)
            else:
                self.errors.append(err)
        return self

    def error_or_none(self) -> "MultiError | None":
        """Return ``self`` when it holds errors, otherwise ``None``."""
        if not self.errors:
            return None
        return self

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __bool__(self) -> bool:
        return bool(self.errors)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiError):
            return NotImplemented
        if len(self.errors) != len(other.errors):
            return False
        return all(
            type(a) is type(b) and str(a) == str(b)
            for a, b in zip(self.errors, other.errors)
        )

    __hash__ = None

    def __str__(self) -> str:
        if len(self.errors) == 1:
            return f"1 error occurred:\n\t* {self.errors[0]}\n\n"
        points = "\n\t".join(f"* {err}" for err in self.errors)
        return f"{len(self.errors)} errors occurred:\n\t{points}\n\n"

    def __repr__(self) -> str:
        return f"MultiError({self.errors!r})"


def append(err: BaseException | None, *errs: BaseException | None) -> MultiError:
    """Append ``errs`` to ``err``, creating a ``MultiError`` when needed."""
    if isinstance(err, MultiError):
        return err.append(*errs)
    return MultiError().append(err, *errs)
