class BlankArgumentError(ValueError):
	'''Indicates a required argument is `None`, empty or only whitespace.'''
	def __init__(self, name:str):
		super().__init__(f"Required parameter is null or blank: {name}")
		self.name = name

class VerificationError(OSError):
	'''Indicates an uploaded file did not match its local copy after the transfer.'''
	def __init__(self, strerror=None, filename=None):
		super().__init__(5, strerror, filename)
