"""Gateways wrapping external processes (bd, git) behind ABCs with real and fake implementations."""
