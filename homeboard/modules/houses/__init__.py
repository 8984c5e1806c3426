"""Houses module: house lifecycle, membership and the role policy."""
