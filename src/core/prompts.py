INTENT_PROMPT = """
Extract information from the following user query about a Solana wallet balance.
If a public key/address is mentioned, identify it. If no address is provided, indicate that we need to request it.

User Query: {query}

{format_instructions}

Helpful notes:
- The action is either 'get_balance' or 'request_address'
- Solana addresses are base58-encoded and typically 32-44 characters long
- They often start with a number or letter
- If you're unsure if something is a valid address, set needsAddress to 'true'
- Use 'none' for publicKey if no address is found
- Use 'true' or 'false' for needsAddress

Provide your response in the exact format requested:
"""

FIXER_PROMPT = """
Instructions:
--------------
{format_instructions}
--------------
Completion:
--------------
{completion}
--------------

Above, the Completion did not satisfy the constraints given in the Instructions.
Error:
--------------
{error}
--------------

Please try again. Please only respond with an answer that satisfies the constraints laid out in the Instructions:
"""
