def aggregate_all(datasets):
    """
    Group every live dataset's records under its canonical name.

    Keys are taken as given; they are never rebuilt by splitting stored names,
    since subject labels may themselves contain underscores.
    """
    grouped = {}
    for name in sorted(datasets):
        grouped.setdefault(name, []).extend(datasets[name])
    return grouped


def aggregate_rows(datasets):
    """Same grouping, with each record in the result-table row shape."""
    return {name: [record.to_row() for record in records] for name, records in aggregate_all(datasets).items()}
