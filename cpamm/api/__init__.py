"""HTTP simulator for the pool program."""
