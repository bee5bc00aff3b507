"""Manage Azure DevOps git repository branches and files declaratively."""
