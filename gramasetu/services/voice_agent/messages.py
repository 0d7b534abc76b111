# User-facing strings shown in the transcript. Kept in Kannada to match the
# assistant's default audience.

RECOGNITION_UNSUPPORTED = "ನಿಮ್ಮ ಸಾಧನಕ್ಕೆ Speech Recognition ಬೆಂಬಲ ಇಲ್ಲ."
RECOGNITION_FAILED = "ಕ್ಷಮಿಸಿ, ವಾಚನವನ್ನು ಹಿಡಿಯಲಾಗಲಿಲ್ಲ."
CONNECTION_ERROR = "⚠️ ಸಂಪರ್ಕ ದೋಷ."
GENERIC_ERROR = "⚠️ ದೋಷ. ಮತ್ತೆ ಪ್ರಯತ್ನಿಸಿ."
NO_ANSWER = "ಕ್ಷಮಿಸಿ — ಉತ್ತರ ಸಿಗಲಿಲ್ಲ."
MIC_HINT = "Mic ಒತ್ತಿ ಮಾತನಾಡಿ — ಮತ್ತೆ ಒತ್ತಿದರೆ ನಿಲ್ಲಿಸುತ್ತದೆ."
