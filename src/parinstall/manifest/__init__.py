"""Manifest parsing: turn a cpanfile into a requirements mapping."""

from parinstall.manifest.cpanfile import DEFAULT_CPANFILE, load_cpanfile, parse_cpanfile

__all__ = ["DEFAULT_CPANFILE", "load_cpanfile", "parse_cpanfile"]
