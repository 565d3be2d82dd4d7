class ActionError(Exception):
    """
    Raised by an action handler to short-circuit to the error envelope.
    The message is shown to the user as is.
    """

    def __init__(self, message, data=None):
        super().__init__(message)
        self.message = message
        self.data = data


class NotLoggedIn(ActionError):
    def __init__(self):
        super().__init__("User not logged in")


class InsufficientPermissions(ActionError):
    def __init__(self, message="Insufficient permissions"):
        super().__init__(message)


class InvalidNonce(ActionError):
    def __init__(self):
        super().__init__("Invalid nonce")


class UnknownAction(ActionError):
    def __init__(self, action):
        super().__init__(f"Unknown action: {str(action)}")


class InvalidField(ActionError):
    def __init__(self):
        super().__init__("Invalid field")


class TrainingProviderUnavailable(ActionError):
    def __init__(self):
        super().__init__("Training provider not available")
