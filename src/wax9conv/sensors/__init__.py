"""WAX9 frame decoders.

:mod:`wax9_settings` parses the metadata text frame, :mod:`wax9_packet`
decodes binary sample frames, and :mod:`units` holds the stateless
conversions both rely on.
"""
