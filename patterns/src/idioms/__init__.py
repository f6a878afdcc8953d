"""Language idioms: records, matching, slicing, callables, generators and sorting."""
