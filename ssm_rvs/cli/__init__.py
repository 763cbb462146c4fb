"""Command line interface (``ssm-rvs``)."""
