"""Keys stored in the signed cookie session."""

# Id of the authenticated user, written by the identity provider's login flow
SESSION_USER_ID = "user_id"
