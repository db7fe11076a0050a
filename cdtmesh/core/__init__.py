"""Implementation package of cdtmesh; import public symbols from ``cdtmesh``."""
