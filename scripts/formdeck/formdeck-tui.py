#!/usr/bin/env python3
"""Thin entrypoint for the formdeck terminal form runner."""

from __future__ import annotations

from form_core.app import main


if __name__ == "__main__":
    raise SystemExit(main())
