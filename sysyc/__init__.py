"""SysY compiler pieces: types, syntax trees, an IR value graph, dominance and loop analysis, assembly output and the runtime library."""

__version__ = "0.1.0"