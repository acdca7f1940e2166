# -*- coding: utf-8 -*-
"""BodyTracker: health log store, sync core and chart aggregation."""
