"""Feed List Organizer: groups, filters and edits a user's subscribed feeds."""
