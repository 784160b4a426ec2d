"""Runtime helpers for mixing plain and async callbacks."""
