"""Infrastructure: database bootstrap and SQLModel repositories."""
