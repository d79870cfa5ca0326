"""Builders for SLMP read and write request frames."""