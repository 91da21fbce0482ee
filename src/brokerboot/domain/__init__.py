"""Domain layer for BROKERBOOT.

Pure rules: the destination-file grammar, argument synthesis, value objects
and the error taxonomy. No I/O beyond reading the destination file, no
subprocesses.
"""
