"""`mlsrs` command line."""
