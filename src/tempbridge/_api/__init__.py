"""eWeLink REST endpoint modules."""
