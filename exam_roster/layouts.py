from .errors import ValidationFailure


def _column_number(column):
    try:
        return int(column)
    except (TypeError, ValueError):
        raise ValidationFailure("Layout columns must be numbers", column=str(column))


def capacity_from_layout(column_bench_map, seats_per_bench):
    """Seats in a room laid out as {column: bench_count}."""
    if seats_per_bench < 0:
        raise ValidationFailure("seats_per_bench must not be negative", seats_per_bench=seats_per_bench)

    benches = 0
    for column, count in column_bench_map.items():
        _column_number(column)
        count = int(count)
        if count < 0:
            raise ValidationFailure("bench count must not be negative", column=str(column), count=count)
        benches += count

    return benches * seats_per_bench


def bench_labels(column_bench_map):
    labels = []

    for column, count in sorted(column_bench_map.items(), key=lambda item: _column_number(item[0])):
        for row in range(1, int(count) + 1):
            labels.append(f"C{column}-R{row}")

    return labels
