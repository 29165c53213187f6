"""Prompting package.

Deterministic instruction-construction helpers for image operations. It does
not validate inputs, call the model, or inspect responses.
"""
