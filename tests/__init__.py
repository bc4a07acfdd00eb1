"""formstate test suite.

- unit/: data types, validator, policy, aggregator, pipeline, loaders, lib
- engine/: FormEngine scenarios and input bindings
- test_cli.py: ``python -m formstate`` check and replay commands
"""
