"""Cloud and cluster services used by the provisioning workflow."""
