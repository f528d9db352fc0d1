# Inbound Adapters (Driving)
