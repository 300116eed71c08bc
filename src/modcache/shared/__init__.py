"""Shared models, errors, constants and logging helpers for modcache."""
