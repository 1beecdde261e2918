"""Identity store entities: administrators, roles and bridge login audit records."""
