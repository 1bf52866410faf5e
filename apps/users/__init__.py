"""Users app package.

Defines the custom user model with customer and vendor roles and the
actor-resolution helpers used by application services. Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout
the project.
"""
