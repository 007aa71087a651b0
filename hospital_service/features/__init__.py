"""Searchable clinical entities, one package per endpoint."""
