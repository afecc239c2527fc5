"""drupal-env - tasks for bootstrapping a Drupal project's local environment."""

__version__ = "0.1.0"
