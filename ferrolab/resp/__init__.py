"""Encoding and decoding of the Redis serialization protocol."""