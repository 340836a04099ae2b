import streamlit as st

st.set_page_config(page_title="Resultado do Envio", layout="centered")

success = st.query_params.get("success") == "true"
message = st.query_params.get("message", "")

if success:
    st.success("Sucesso!")
    st.write(message or "Formulário enviado com sucesso!")
else:
    st.error("Erro!")
    st.write(message or "Ocorreu um erro ao enviar o formulário.")

st.page_link("Home.py", label="Voltar ao Formulário")
