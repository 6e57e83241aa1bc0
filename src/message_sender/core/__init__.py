"""Dispatch core: active provider holder, bootstrap, initializer and dispatcher."""
