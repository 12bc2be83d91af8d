"""Box inventory: group items into QR-labelled boxes and search across them."""
