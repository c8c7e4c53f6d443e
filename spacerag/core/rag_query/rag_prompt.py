"""
RAG answer prompt.

System instruction restricting the model to the supplied sources and
asking for bracketed source numbers, followed by prior turns and the
current question.

Dependencies: langchain_core.prompts
System role: Prompt template for answer synthesis
"""

from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

NOT_FOUND_ANSWER = "I cannot find information about this in your uploaded sources."

SYSTEM_PROMPT = """You are a helpful study assistant. Answer the user's question based ONLY on the provided context.
If the context doesn't contain relevant information, say "{not_found_answer}"
When citing information, reference the source numbers like [1] or [2] in your answer.

Context from documents:
{context}"""

RAG_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    MessagesPlaceholder("chat_history", optional=True),
    ("human", "{question}"),
]).partial(not_found_answer=NOT_FOUND_ANSWER)
