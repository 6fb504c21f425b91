from eth_utils import event_signature_to_log_topic

# Manager role ManagerChanged(address indexed previousManager, address indexed newManager)
MANAGER_CHANGED_EVENT_SIGNATURE = "0x" + event_signature_to_log_topic("ManagerChanged(address,address)").hex()
