"""
CNC Gateway Config — device configuration generator for CNC gateways.

Derives the gateway identity from the outbound interface MAC address and
writes the hostapd and gateway agent configuration files from it.
"""
