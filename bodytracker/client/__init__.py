# -*- coding: utf-8 -*-
"""Client-side sync core: store backends, local replica and per-identity context."""
