"""Core building blocks shared by every workflow domain."""
