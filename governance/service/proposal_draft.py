from typing import List, Tuple, Union

from governance.models.proposal_action import EncodedActions, ProposalAction


class ProposalDraft(object):
    """
    A proposal being authored: title, body and an ordered list of actions.
    Order is significant; flatten() produces index-aligned targets/values/calldatas in insertion order.
    """

    def __init__(self, title: str = "", body: str = ""):
        self.title = title
        self.body = body
        self._actions: List[ProposalAction] = []

    @property
    def actions(self) -> List[ProposalAction]:
        return list(self._actions)

    def add(self, item: Union[ProposalAction, EncodedActions]) -> None:
        if isinstance(item, EncodedActions):
            self._actions.extend(item.actions)
        else:
            self._actions.append(item)

    def remove(self, index: int) -> ProposalAction:
        if not 0 <= index < len(self._actions):
            raise IndexError(f"No action at index {index} (draft has {len(self._actions)})")
        return self._actions.pop(index)

    def clear(self) -> None:
        self._actions.clear()

    def flatten(self) -> Tuple[List[str], List[int], List[str]]:
        targets = [action.target for action in self._actions]
        values = [action.value for action in self._actions]
        calldatas = [action.calldata for action in self._actions]
        return targets, values, calldatas

    def __len__(self) -> int:
        return len(self._actions)
