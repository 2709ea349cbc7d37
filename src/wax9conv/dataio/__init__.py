"""Data output helpers (CSV files and file names).

- :mod:`csv_writer` writes decoded samples and rotates files.
- :mod:`file_paths` builds mHealth file names and timestamp strings.
- :mod:`log_loader` reads converted files back for offline review.
"""
