"""Core building blocks shared by the drupal-env commands."""
