"""This package defines the table alignment engine and its components."""

__app_name__ = "pipealign"
__version__ = "0.1.0"
__strapline__ = "Visually align plain-text tables"
__author__ = "Josiah Outram Halstead"
__email__ = "josiah@halstead.email"
__copyright__ = f"© 2022, {__author__}"
__license__ = "MIT"
