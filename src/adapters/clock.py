from datetime import UTC, datetime


class SystemClock:
    def now(self) -> datetime:
        # Naive UTC; stored timestamps and task due times share this form.
        return datetime.now(UTC).replace(tzinfo=None)
