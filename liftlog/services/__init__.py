"""Core operations. Every function takes an AsyncSession; the caller commits."""
